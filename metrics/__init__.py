"""Metric family models and per-family aggregation"""
