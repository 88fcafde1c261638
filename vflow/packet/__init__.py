"""Decoding of layer two, three and four packet headers."""