"""Namespace for message queue producers; it holds no modules yet."""