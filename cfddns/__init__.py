"""cfddns - keep Cloudflare address records pointed at this host's public IP."""

__version__ = "0.3.0"
