"""Wave code issuance and rendering for printed book pages."""

__version__ = "0.1.0"
