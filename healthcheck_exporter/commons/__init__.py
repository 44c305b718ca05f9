"""healthcheck_exporter.commons package."""
