# ==============================================
# Field Insights
# ==============================================
#
# Package Structure:
#
# field_insights/
# ├── aggregation/      # Value histograms, ranking, chart data
# ├── client/           # Export API client (requests)
# ├── config.py         # Configuration management
# ├── dashboard.py      # Orchestrator: export → aggregate → views
# ├── errors.py         # Exception classes
# ├── logging.py        # JSON logging helpers
# ├── render.py         # Plain-text field cards
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
