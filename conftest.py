# Keep ad-hoc debug scripts (tools/) out of collection

def pytest_ignore_collect(collection_path, config):
    try:
        rel = collection_path.relative_to(config.rootpath)
    except ValueError:
        return None
    if rel.parts and rel.parts[0] == 'tools':
        return True
    return None
