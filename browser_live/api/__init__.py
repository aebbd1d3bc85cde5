"""HTTP surface: task status for the live-view widget"""
