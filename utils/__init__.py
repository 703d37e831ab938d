"""hostsweep Utils"""
from utils.logger    import get_logger, set_level, log
from utils.constants import HostStatus, PortStatus, AddressFamily
from utils.config    import ScanConfig, ConfigError, load_config
from utils.duration  import parse_duration, DurationParseError
__all__ = ["get_logger", "set_level", "log",
           "HostStatus", "PortStatus", "AddressFamily",
           "ScanConfig", "ConfigError", "load_config",
           "parse_duration", "DurationParseError"]
