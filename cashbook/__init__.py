"""Personal finance ledger with a PDF archive exporter."""
