import re


def screenshot_name(title: str) -> str:
    """
    Turn a test's full title into a file-safe screenshot name.
    Every character outside [a-zA-Z0-9-] becomes '_'.
    """
    return re.sub(r'[^a-z0-9\-]', '_', str(title or ''), flags=re.IGNORECASE)


def full_title(nodeid: str) -> str:
    """
    Return a readable 'Module Class test' title from a pytest node id,
    e.g. 'areas/test_search.py::TestSearch::test_find' -> 'test_search TestSearch test_find'.
    """
    if not nodeid:
        return ''
    path, _, rest = nodeid.partition('::')
    module = path.rsplit('/', 1)[-1]
    if module.endswith('.py'):
        module = module[:-3]
    parts = [module] + [p for p in rest.split('::') if p]
    return ' '.join(p for p in parts if p)
