"""Application composition layer.

Wires view models, adapters and use cases into runnable entry points without
placing business logic here.
"""
