"""healthcheck_exporter.cluster package."""
