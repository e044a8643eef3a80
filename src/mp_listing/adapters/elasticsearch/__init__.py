"""Elasticsearch adapter – SearchIndex over the Elasticsearch REST API."""
from mp_listing.adapters.elasticsearch.index import ElasticsearchIndex, build_request_body, parse_response

__all__ = ["ElasticsearchIndex", "build_request_body", "parse_response"]
