"""
EzSchedule: keep track of scheduled events from the terminal.
"""
