"""Command execution, property cache and logging"""
