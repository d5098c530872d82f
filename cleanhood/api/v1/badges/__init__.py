"""Badges API routes"""
