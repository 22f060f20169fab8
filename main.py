"""
Bugsnag Provider 入口点

启动 HTTP 服务，供声明式引擎调用资源与数据源操作。
"""

import logging
import sys

from bugsnag_provider.http_server import main as run_http_server

logger = logging.getLogger(__name__)


def main():
    """主入口"""
    try:
        run_http_server()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        # 确保错误输出到 stderr
        logger.critical("Bugsnag provider crashed: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
