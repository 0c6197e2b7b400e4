"""Shop admin console"""
