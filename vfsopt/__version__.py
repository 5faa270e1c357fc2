VERSION = (0, 3, 1)

S_VERSION = ".".join(map(str, VERSION))
