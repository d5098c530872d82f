"""Redemptions API routes"""
