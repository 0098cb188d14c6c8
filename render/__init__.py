"""Styled rendering of parsed metric families"""
