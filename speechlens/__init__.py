"""speechlens: tf-idf and correspondence analysis over labeled speech corpora."""

__version__ = "0.1.0"
