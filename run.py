import logging
from typing import Optional

import uvicorn

from docsync import config as env
from docsync.api.server import create_app
from docsync.container import Container
from docsync.db.engine import init_orm

logger = logging.getLogger(__name__)


def main(container: Optional[Container] = None, host: str = "0.0.0.0", port: int = 8000):
    logging.basicConfig(level=env.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    container = container or Container()

    if container.config.DATABASE_URL():
        init_orm(container.db_engine())
    else:
        logger.warning("DATABASE_URL not set; reconciliation endpoints will fail until it is configured")

    app = create_app(container)
    logger.info("DocSync API listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == '__main__':
    main()
