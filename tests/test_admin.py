from marketplace.app import create_app
from marketplace.db import db
from marketplace.init_db import ensure_admin
from marketplace.models import Role, User
from tests.conftest import ADMIN_EMAIL, auth, create_listing, register


def _sell(client, seller_token, buyer_token, **listing_fields):
    listing = create_listing(client, seller_token, **listing_fields)
    req = client.post("/requests/", json={"listing_id": listing["id"]},
                      headers=auth(buyer_token)).get_json()
    client.put(f"/requests/{req['id']}/accept", headers=auth(seller_token))
    res = client.post("/orders/", json={
        "request_id": req["id"],
        "shipping_name": "B", "shipping_email": "b@example.com", "shipping_phone": "1",
        "shipping_address": "Somewhere", "shipping_pincode": "560001",
        "payment_method": "Card",
    }, headers=auth(buyer_token))
    assert res.status_code == 201
    return listing, res.get_json()


class TestAdminAccess:
    """Admin endpoints are closed to everyone but admins"""

    def test_requires_token(self, client):
        for path in ("/admin/users", "/admin/listings_full", "/admin/sold_items", "/admin/stats"):
            assert client.get(path).status_code == 401

    def test_non_admin_is_forbidden(self, client, seller):
        res = client.get("/admin/users", headers=auth(seller[0]))
        assert res.status_code == 403
        assert client.delete("/admin/listings/1", headers=auth(seller[0])).status_code == 403

    def test_bootstrap_admin_is_created_once(self, app):
        create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": app.config["SQLALCHEMY_DATABASE_URI"],
        })
        with app.app_context():
            admins = db.session.query(User).filter_by(role=Role.admin).all()
            assert [a.email for a in admins] == [ADMIN_EMAIL]

    def test_bootstrap_reuses_existing_account_with_admin_email(self, app):
        with app.app_context():
            admin = db.session.query(User).filter_by(role=Role.admin).one()
            admin.role = Role.buyer
            db.session.commit()

            found = ensure_admin(db.session, "Administrator", ADMIN_EMAIL.upper(), "other-pass")
            assert found.id == admin.id
            assert db.session.query(User).filter_by(email=ADMIN_EMAIL).count() == 1


class TestAdminUsers:
    """/admin/users"""

    def test_list_users(self, client, admin_token, seller, buyer):
        rows = client.get("/admin/users", headers=auth(admin_token)).get_json()
        assert {u["email"] for u in rows} == {ADMIN_EMAIL, "seller@example.com", "buyer@example.com"}
        assert all("password" not in u for u in rows)

    def test_delete_user_cascades_listings(self, client, admin_token, seller, buyer):
        s_token, s_user = seller
        create_listing(client, s_token, title="A")
        create_listing(client, s_token, title="B")
        kept = create_listing(client, register(client, "keeper@example.com", role="seller")[0], title="C")
        client.post("/requests/", json={"listing_id": kept["id"]}, headers=auth(s_token))

        res = client.delete(f"/admin/users/{s_user['id']}", headers=auth(admin_token))
        assert res.status_code == 200

        titles = [l["title"] for l in client.get("/listings/").get_json()]
        assert titles == ["C"]
        assert client.get(f"/listings/?seller_id={s_user['id']}").get_json() == []
        assert client.get("/requests/incoming", headers=auth(
            client.post("/auth/login", json={"email": "keeper@example.com", "password": "secret123"})
            .get_json()["access_token"])).get_json() == []
        assert client.get("/auth/me", headers=auth(s_token)).status_code == 401

    def test_delete_missing_user(self, client, admin_token):
        res = client.delete("/admin/users/999", headers=auth(admin_token))
        assert res.status_code == 404
        assert res.get_json()["error"] == "user_not_found"

    def test_admin_cannot_delete_self(self, client, admin_token):
        me = client.get("/auth/me", headers=auth(admin_token)).get_json()
        res = client.delete(f"/admin/users/{me['id']}", headers=auth(admin_token))
        assert res.status_code == 400
        assert res.get_json()["error"] == "self_delete_forbidden"


class TestAdminListings:
    """/admin/listings_full and /admin/listings/<id>"""

    def test_listings_full_includes_profit(self, client, admin_token, seller):
        create_listing(client, seller[0], price=100)
        rows = client.get("/admin/listings_full", headers=auth(admin_token)).get_json()
        assert rows[0]["price"] == 130
        assert rows[0]["profit"] == 30

    def test_delete_listing(self, client, admin_token, seller, buyer):
        listing = create_listing(client, seller[0])
        client.post("/requests/", json={"listing_id": listing["id"]}, headers=auth(buyer[0]))

        assert client.delete(f"/admin/listings/{listing['id']}", headers=auth(admin_token)).status_code == 200
        assert client.get(f"/listings/{listing['id']}").status_code == 404
        assert client.get("/requests/my-requests", headers=auth(buyer[0])).get_json() == []
        assert client.delete(f"/admin/listings/{listing['id']}", headers=auth(admin_token)).status_code == 404


class TestAdminReports:
    """/admin/sold_items and /admin/stats"""

    def test_sold_items_joins_parties(self, client, admin_token, seller, buyer):
        first, _ = _sell(client, seller[0], buyer[0], title="Old Radio", price=100)
        second, second_order = _sell(client, seller[0], buyer[0], title="Game Boy", price=200)
        create_listing(client, seller[0], title="Unsold")

        rows = client.get("/admin/sold_items", headers=auth(admin_token)).get_json()
        assert [r["title"] for r in rows] == ["Game Boy", "Old Radio"]
        top = rows[0]
        assert top["id"] == second["id"]
        assert top["order_id"] == second_order["id"]
        assert top["profit"] == 40
        assert top["seller_name"] == "Sam Seller"
        assert top["seller_email"] == "seller@example.com"
        assert top["buyer_name"] == "Bea Buyer"
        assert top["buyer_email"] == "buyer@example.com"
        assert top["payment_method"] == "Card"
        assert top["sold_date"]

    def test_stats(self, client, admin_token, seller, buyer):
        _sell(client, seller[0], buyer[0], price=100)
        create_listing(client, seller[0], price=200)

        stats = client.get("/admin/stats", headers=auth(admin_token)).get_json()
        assert stats["users"] == {"total": 3, "buyer": 1, "seller": 1, "admin": 1}
        assert stats["listings"] == {"total": 2, "active": 1, "sold": 1}
        assert stats["orders"] == 1
        assert stats["profit"] == {"realised": 30.0, "potential": 40.0}
