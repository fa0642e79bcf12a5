"""Tests for adding and removing reviews on a listing."""

from __future__ import annotations

from app.models.review import Review


def test_create_review(client, db, make_listing, owner):
    listing = make_listing()

    resp = client.post(
        f"/listings/{listing.id}/reviews",
        data={"review[rating]": "4", "review[comment]": "Great host"},
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == f"/listings/{listing.id}"
    review = db.query(Review).one()
    assert (review.rating, review.comment, review.author_id) == (4, "Great host", owner.id)
    assert "Great host" in client.get(f"/listings/{listing.id}").text


def test_create_review_rejects_out_of_range_rating(client, db, make_listing):
    listing = make_listing()
    resp = client.post(
        f"/listings/{listing.id}/reviews",
        data={"review[rating]": "6", "review[comment]": "Too good"},
    )
    assert resp.status_code == 400
    assert "review.rating" in resp.context["errors"]
    assert db.query(Review).count() == 0


def test_create_review_on_missing_listing(client):
    resp = client.post(
        "/listings/999/reviews",
        data={"review[rating]": "3", "review[comment]": "Hmm"},
        follow_redirects=False,
    )
    assert resp.headers["location"] == "/listings"


def test_delete_review(client, db, make_listing, owner):
    listing = make_listing()
    review = Review(listing_id=listing.id, author_id=owner.id, rating=2, comment="Noisy")
    db.add(review)
    db.commit()

    resp = client.post(f"/listings/{listing.id}/reviews/{review.id}?_method=DELETE")

    assert "Review Deleted!" in resp.text
    assert db.query(Review).count() == 0


def test_delete_missing_review(client, make_listing):
    listing = make_listing()
    resp = client.delete(f"/listings/{listing.id}/reviews/77")
    assert "Review does not exist!" in resp.text


def test_non_numeric_review_id_redirects(client, make_listing):
    listing = make_listing()
    resp = client.delete(f"/listings/{listing.id}/reviews/abc", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/listings"
    assert "Review does not exist!" in client.get("/listings").text
