from .core.cfg import Configuration
from .core.cfg_decoder import decode_cfg, LineCursor
from .core.channels import AnalogChannelTable, DigitalChannelTable, SampleRate
from .core.dat_reader import (
    extract_all_analog,
    extract_analog_channel,
    extract_status_channel,
    read_sample_headers,
    record_size,
    time_axis
)
from .core.exceptions import (
    ComtradeError,
    DecodeError,
    ExtractError,
    MalformedHeaderError,
    ChannelCountMismatchError,
    MissingChannelTypeTagError,
    MalformedChannelRowError,
    TruncatedDocumentError,
    FieldParseError,
    MissingConfigurationError,
    EmptyDataBufferError,
    InvalidChannelError,
    MissingSampleRateError,
    TruncatedSampleDataError
)
from .core.options import DecoderOptions
from .core.time_code import time_code_to_ns
from .io.comtrade_loader import Comtrade
