"""
HTTP tests for the categories blueprint.
"""

from catalog.models import Category


def _rows(client, **params):
    response = client.get("/categories/rows", query_string=params)
    assert response.status_code == 200
    return response.get_json()


def test_index_redirects_to_listing(client):
    response = client.get("/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/categories/")


def test_listing_renders_hierarchy(client):
    response = client.get("/categories/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Cordas" in body
    assert "11 category(ies)" in body


def test_rows_are_paginated_in_hierarchical_order(client):
    first = _rows(client)
    assert first["mode"] == "hierarchical"
    assert first["pages"] == 2
    assert [(r["category"]["name"], r["level"]) for r in first["rows"][:5]] == [
        ("Acessórios", 0),
        ("Cordas", 0),
        ("Baixos", 1),
        ("Guitarras", 1),
        ("Guitarras Elétricas", 2),
    ]
    second = _rows(client, page=2)
    assert [r["category"]["name"] for r in second["rows"]] == ["Sintetizadores"]


def test_page_beyond_range_is_clamped(client):
    assert _rows(client, page=40)["page"] == 2


def test_new_search_term_resets_page(client):
    assert _rows(client, page=2)["page"] == 2
    data = _rows(client, q="gui", page=2)
    assert data["page"] == 1
    assert data["mode"] == "filtered"
    assert len(data["directMatches"]) == 2


def test_search_highlights_direct_matches(client):
    body = client.get("/categories/?q=eletricas").get_data(as_text=True)
    assert "<mark>Elétricas</mark>" in body


def test_sort_header_links_cycle(client):
    body = client.get("/categories/?sort=name&dir=asc").get_data(as_text=True)
    assert "sort=name&amp;dir=desc" in body
    body = client.get("/categories/?sort=name&dir=desc").get_data(as_text=True)
    assert 'href="/categories/">Name' in body


def test_create_category(client, category_id):
    response = client.post(
        "/categories/create",
        data={"name": "Ukuleles", "parent_id": str(category_id("Cordas")), "enabled": "1"},
    )
    assert response.status_code == 302
    created = Category.query.filter_by(name="Ukuleles").one()
    assert created.parent_id == category_id("Cordas")
    assert created.enabled is True


def test_create_requires_name(client):
    response = client.post("/categories/create", data={"name": "  "})
    assert response.status_code == 400
    assert "The category name is required." in response.get_data(as_text=True)
    assert Category.query.count() == 11


def test_create_duplicate_name_shows_friendly_message(client):
    response = client.post("/categories/create", data={"name": "Teclas"})
    assert response.status_code == 400
    body = response.get_data(as_text=True)
    assert "Duplicate name" in body
    assert Category.query.count() == 11


def test_edit_form_excludes_subtree(client, category_id):
    body = client.get(f"/categories/{category_id('Guitarras')}/edit").get_data(as_text=True)
    assert f'value="{category_id("Cordas")}"' in body
    assert f'value="{category_id("Guitarras Elétricas")}"' not in body
    assert f'value="{category_id("Guitarras")}"' not in body


def test_update_to_descendant_is_rejected(client, category_id):
    response = client.post(
        f"/categories/{category_id('Cordas')}/update",
        data={"name": "Cordas", "parent_id": str(category_id("Guitarras"))},
    )
    assert response.status_code == 400
    assert "Invalid parent category" in response.get_data(as_text=True)
    assert Category.query.filter_by(name="Cordas").one().parent_id is None


def test_update_moves_category(client, category_id):
    response = client.post(
        f"/categories/{category_id('Baixos')}/update",
        data={"name": "Baixos Elétricos", "parent_id": str(category_id("Guitarras")), "enabled": "1"},
    )
    assert response.status_code == 302
    moved = Category.query.filter_by(name="Baixos Elétricos").one()
    assert moved.parent_id == category_id("Guitarras")


def test_delete_with_subcategories_is_blocked(client, category_id):
    response = client.post(f"/categories/{category_id('Cordas')}/delete", follow_redirects=True)
    assert "has subcategories" in response.get_data(as_text=True)
    assert Category.query.filter_by(name="Cordas").count() == 1


def test_delete_leaf(client, category_id):
    response = client.post(f"/categories/{category_id('Baixos')}/delete")
    assert response.status_code == 302
    assert Category.query.filter_by(name="Baixos").count() == 0


def test_detail_shows_parent_and_children(client, category_id):
    body = client.get(f"/categories/{category_id('Guitarras')}").get_data(as_text=True)
    assert "Cordas" in body
    assert "Subcategories (1)" in body
    assert "category-placeholder.svg" in body


def test_unknown_category_is_404(client):
    assert client.get("/categories/9999/edit").status_code == 404


def test_export_downloads_hierarchical_csv(client):
    response = client.get("/categories/export")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    disposition = response.headers["Content-Disposition"]
    assert "attachment" in disposition and "categories_" in disposition
    text = response.data.decode("utf-8-sig")
    lines = text.split("\n")
    assert lines[0] == "id,name"
    assert lines[3].endswith(',"  Baixos"')
    assert len(lines) == 12


def test_export_without_categories_reports_no_data(app):
    client = app.test_client()
    response = client.get("/categories/export", follow_redirects=True)
    assert response.status_code == 200
    assert "There are no categories to export." in response.get_data(as_text=True)


def test_reset_restores_factory_data(client, category_id):
    client.post(f"/categories/{category_id('Baixos')}/delete")
    response = client.post("/categories/reset", follow_redirects=True)
    assert "Catalog reset" in response.get_data(as_text=True)
    assert Category.query.count() == 11


def test_export_reports_load_failure_instead_of_empty_catalog(client, monkeypatch):
    from catalog.errors import CategoryStoreError
    from catalog.services.category_store import CategoryStore

    def broken_fetch(self):
        raise CategoryStoreError("database is locked")

    monkeypatch.setattr(CategoryStore, "fetch_all", broken_fetch)
    response = client.get("/categories/export")
    assert response.status_code == 302
    page = client.get("/categories/").get_data(as_text=True)
    assert "Could not load the categories." in page
    assert "There are no categories to export." not in page
