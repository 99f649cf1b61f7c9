"""Latest-row ingestion API for shop-floor production CSV logs."""

__version__ = "1.0.0"
