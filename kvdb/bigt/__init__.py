"""Connection strings, column errors and row-cell decoding for wide-column tables."""