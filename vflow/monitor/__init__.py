"""Collector statistics ingestion into InfluxDB and OpenTSDB."""