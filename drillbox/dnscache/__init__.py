"""A bucketed hash map and DNS caches built on it."""