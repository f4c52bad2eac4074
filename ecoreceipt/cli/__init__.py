"""Unified command-line interface for ecoreceipt.

Usage:
    ecoreceipt parse <file>
    ecoreceipt scan <image>
    ecoreceipt serve [--host] [--port]
"""
