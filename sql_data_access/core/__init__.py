"""
Driver-independent building blocks: parameters, commands, readers,
exceptions and the per-call executor.
"""
