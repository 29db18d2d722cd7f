class ConfigError(Exception):
    """Invalid or missing startup configuration. Fatal."""


class UpstreamError(Exception):
    """The upstream LLM call failed or returned nothing usable."""
