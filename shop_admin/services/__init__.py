"""Backend API clients and the order status policy"""
