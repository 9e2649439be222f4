"""
PRIDE cloud configuration
Server address, port and logging settings, read from the environment
"""

import os

# 默认配置
DEFAULT_CLOUD_HOST = os.getenv('CLOUD_HOST', '0.0.0.0')
DEFAULT_CLOUD_PORT = int(os.getenv('CLOUD_PORT', 5004))

DEFAULT_LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
DEFAULT_LOG_FILE = os.getenv('LOG_FILE') or None

MIN_PORT = 1
MAX_PORT = 65535


class Config:
    """配置类"""

    def __init__(self):
        self.cloud_host = DEFAULT_CLOUD_HOST
        self.cloud_port = DEFAULT_CLOUD_PORT
        self.log_level = DEFAULT_LOG_LEVEL
        self.log_file = DEFAULT_LOG_FILE

    @property
    def cloud_url(self):
        host = 'localhost' if self.cloud_host == '0.0.0.0' else self.cloud_host
        return f"http://{host}:{self.cloud_port}"

    @staticmethod
    def valid_port(port: int) -> bool:
        return MIN_PORT <= port <= MAX_PORT


# 全局配置实例
config = Config()
