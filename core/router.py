"""Target URL resolution - maps mount-prefixed paths onto the internal API."""


class TargetResolver:
    """Strip the public mount prefix and rebuild the path against a base URL."""

    def __init__(self, mount_prefix: str = "/api/op"):
        self.mount_prefix = "/" + mount_prefix.strip("/")

    def strip_prefix(self, path: str) -> str:
        """Return the part of the path after the mount prefix, without leading slash."""
        if path == self.mount_prefix:
            return ""
        if path.startswith(self.mount_prefix + "/"):
            return path[len(self.mount_prefix) + 1:]
        return path.lstrip("/")

    def build_target_url(self, base_url: str, path: str, query: str = "") -> str:
        """Join base URL, stripped path and the raw query string."""
        target = f"{base_url}/{self.strip_prefix(path)}"
        if query:
            target += f"?{query}"
        return target
