"""
frameflow_tools - shared logging and reporting helpers for the frameflow engine.
"""
