"""NetFlow version 5 decoding and JSON encoding."""