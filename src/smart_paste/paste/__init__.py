"""Paste pipeline: classification, node building, and orchestration."""
