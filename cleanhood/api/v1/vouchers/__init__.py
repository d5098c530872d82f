"""Vouchers API routes"""
