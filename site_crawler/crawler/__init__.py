"""
site_crawler.crawler: the crawl engine (normalizer, scope policy, extractor,
frontier, pacing and the async worker pool).
"""
