from app.views.components.history_router import HistoryRouter, Location


def _recording_router():
    router = HistoryRouter()
    seen = []
    router.locationChanged.connect(lambda identity, query: seen.append((identity, query)))
    return router, seen


def test_push_and_back_forward(qapp):
    router, seen = _recording_router()
    router.replace(Location("a.jpg", ""))
    router.push("b.jpg")
    router.push("c.jpg")
    assert router.back() is True
    assert router.identity == "b.jpg"
    assert router.can_go_forward()
    assert router.forward() is True
    assert router.identity == "c.jpg"
    assert router.forward() is False
    assert seen == [("a.jpg", ""), ("b.jpg", ""), ("c.jpg", ""), ("b.jpg", ""), ("c.jpg", "")]


def test_filter_keeps_identity(qapp):
    router, seen = _recording_router()
    router.replace(Location("a.jpg", ""))
    router.set_filter("cat")
    assert router.location == Location("a.jpg", "cat")
    router.push("b.jpg")
    assert router.query == "cat"
    assert seen[-1] == ("b.jpg", "cat")


def test_same_location_is_not_recorded(qapp):
    router, seen = _recording_router()
    router.push("a.jpg")
    router.push("a.jpg")
    assert len(seen) == 1
    assert router.back() is True
    assert router.identity is None
    assert not router.can_go_back()


def test_new_navigation_drops_forward_history(qapp):
    router, _ = _recording_router()
    router.push("a.jpg")
    router.push("b.jpg")
    router.back()
    router.push("c.jpg")
    assert not router.can_go_forward()
