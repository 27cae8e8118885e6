from invitecrawl.api.routers.systems import create_systems_router


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def test_health():
    endpoint = _get_endpoint(create_systems_router({}), "/systems/health", "GET")
    assert endpoint() == {"status": "ok"}


def test_config_masks_bot_token():
    env = {"TELEGRAM_BOT_TOKEN": "123:secret", "MAX_RETRIES": 3, "REPORT_DIR": None}
    endpoint = _get_endpoint(create_systems_router(env), "/systems/config", "GET")

    assert endpoint() == {
        "environment": {"TELEGRAM_BOT_TOKEN": "***", "MAX_RETRIES": "3", "REPORT_DIR": None}
    }
