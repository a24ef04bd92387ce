REQUIRED_KEYS = {
    "BYBIT": ("api_key", "api_secret", "account_type"),
    "TELEGRAM": ("token", "chat_id"),
}
POSITIVE_INTS = ("CHECK_INTERVAL", "POSITIONS_LIMIT", "CLOSED_PNL_LIMIT")


def validate_config(config: dict):
    missing = [
        f"{section}.{key}"
        for section, keys in REQUIRED_KEYS.items()
        for key in keys
        if not (config.get(section) or {}).get(key)
    ]
    if config.get("CHECK_INTERVAL") is None:
        missing.append("CHECK_INTERVAL")
    if missing:
        raise ValueError(f"Missing required configuration keys: {missing}")

    for key in POSITIVE_INTS:
        value = config.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{key} must be an integer, got {value!r}.")
        if value <= 0:
            raise ValueError(f"{key} must be positive, got {value}.")

    timeout = config.get("HTTP_TIMEOUT")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise TypeError(f"HTTP_TIMEOUT must be a number, got {timeout!r}.")
        if timeout <= 0:
            raise ValueError(f"HTTP_TIMEOUT must be positive, got {timeout}.")
