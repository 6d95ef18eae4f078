from fastapi import Request

from aggregator_api.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
