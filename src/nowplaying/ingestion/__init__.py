"""Ingestion helpers: tolerant coercion and report sanitizing."""

from nowplaying.ingestion.report import sanitize_report

__all__ = ["sanitize_report"]
