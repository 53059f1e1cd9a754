from .httpx_transport import HttpxTransport, encode_form

__all__ = ["HttpxTransport", "encode_form"]
