from .controller import AuditDashboard, DashboardState, Toast
from .downloads import DownloadBlob, to_data_uri, to_download, write_blob, write_export

__all__ = [
    "AuditDashboard",
    "DashboardState",
    "Toast",
    "DownloadBlob",
    "to_data_uri",
    "to_download",
    "write_blob",
    "write_export",
]
