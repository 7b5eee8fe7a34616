# ==============================================
# EXPORT API CLIENT
# ==============================================
#
# Fetches record batches over HTTP for aggregation.
#
# Modules:
# --------
# - export_client.py  → ExportClient (requests + thread pool)
#
# ==============================================

from .export_client import ExportClient

__all__ = ["ExportClient"]
