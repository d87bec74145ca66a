"""
Глобальные pytest fixtures и конфигурация для всех тестов.

Этот файл автоматически загружается pytest и делает доступными
fixtures для всех тестов в проекте.
"""

import pytest
import sys
import os

# Добавляем корневую директорию в путь для импортов
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tests.test_data.fixtures import create_cfg_text, create_dat_bytes


@pytest.fixture(scope="session")
def test_data_dir():
    """Возвращает путь к папке с тестовыми данными."""
    return os.path.join(os.path.dirname(__file__), "test_data")


@pytest.fixture
def cfg_text():
    """
    Fixture: CFG с 2 аналоговыми и 2 дискретными каналами.

    IA: a=2.0, b=1.0, с коэффициентами трансформации 1000/1 и признаком P
    U Bus 1: a=0.5, b=0.0, без необязательных столбцов
    3 выборки на 1000 Гц, формат BINARY, time_code "+3h".
    """
    return create_cfg_text()


@pytest.fixture
def dat_bytes():
    """
    Fixture: DAT из 3 выборок для cfg_text.

    IA: 10, 20, -30; U Bus 1: 100, -200, 300;
    Breaker On: 1, 0, 1; Trip: 0, 1, 1.
    """
    return create_dat_bytes(
        analog=[[10, 20, -30], [100, -200, 300]],
        status=[[1, 0, 1], [0, 1, 1]],
    )


@pytest.fixture
def comtrade_dir(tmp_path, cfg_text, dat_bytes):
    """
    Fixture: временная директория с парой test.cfg / test.dat.

    Возвращает Path к директории.
    """
    fixture_dir = tmp_path / "comtrade_fixture"
    fixture_dir.mkdir(exist_ok=True)
    (fixture_dir / "test.cfg").write_text(cfg_text, encoding="utf-8")
    (fixture_dir / "test.dat").write_bytes(dat_bytes)
    return fixture_dir
