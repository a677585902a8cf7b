"""Domain layer: names, properties, handles, errors"""
