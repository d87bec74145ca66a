import logging
import os

from tqdm import tqdm

from comtrade_tools.core.options import DecoderOptions
from comtrade_tools.io.comtrade_loader import Comtrade

logger = logging.getLogger(__name__)


class ReadComtrade():
    def __init__(self, options: DecoderOptions = None):
        """Инициализатор класса ReadComtrade."""
        self.options = options or DecoderOptions()
        self.unread_files = set()

    def read_comtrade(self, file_name):
        """Загружает и читает содержимое файлов comtrade.

        Возвращает кортеж (Comtrade, DataFrame) или (None, None) при ошибке.
        """
        try:
            rec = Comtrade(self.options)
            rec.load(file_name)
            raw_df = rec.to_dataframe()
            return rec, raw_df
        except Exception as ex:
            logger.error("Ошибка при обработке файла %s: %s: %s",
                         os.path.basename(str(file_name)), type(ex).__name__, ex,
                         exc_info=True)
            self.unread_files.add(file_name)
            return None, None

    def read_directory(self, raw_path: str) -> dict:
        """
        Читает все файлы .cfg каталога.

        Возвращает словарь {имя файла: (Comtrade, DataFrame)} только для успешно
        прочитанных осциллограмм; остальные попадают в self.unread_files.
        """
        raw_files = sorted(file for file in os.listdir(raw_path)
                           if file.lower().endswith('.' + Comtrade.EXT_CFG))
        result = {}
        with tqdm(total=len(raw_files), desc="Чтение осциллограмм Comtrade") as pbar:
            for file in raw_files:
                rec, raw_df = self.read_comtrade(os.path.join(raw_path, file))
                if rec is not None:
                    result[file] = (rec, raw_df)
                pbar.update(1)
        if self.unread_files:
            logger.warning("Не удалось прочитать %d файл(ов)", len(self.unread_files))
        return result
