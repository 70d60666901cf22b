"""
Run the API server:

    python -m basechat

Credentials, service URLs and the bind address are read from the environment,
see 'basechat.settings'.
"""

import uvicorn

from basechat.api.app import create_app
from basechat.pipeline import build_controller
from basechat.settings import get_settings

settings = get_settings()
app = create_app(build_controller(settings))

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
