"""Donations API routes"""
