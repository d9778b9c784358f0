"""
Infrastructure adapters: database drivers and the connection factory.
"""
