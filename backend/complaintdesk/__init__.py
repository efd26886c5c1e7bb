"""ComplaintDesk - complaint submission and tracking API"""

__version__ = "1.0.0"
