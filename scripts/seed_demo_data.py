"""Seed a demo reader, an article and a short comment thread."""

from app import create_app
from models import db
from models.article import Article
from models.article_interaction import ArticleInteraction
from models.comment import Comment
from models.user import User

DEMO_ARTICLE_URL = "https://www.cnnindonesia.com/teknologi/demo-artikel"


def get_or_create_user(email: str, username: str, password: str) -> User:
    user = User.find_by_email(email)
    if user is None:
        user = User(
            username=username,
            email=email,
            display_name=username,
            is_email_verified=True,
        )
        db.session.add(user)
    else:
        user.is_email_verified = True
    user.set_password(password)
    return user


def main() -> None:
    app = create_app()
    with app.app_context():
        reader = get_or_create_user("reader@example.com", "pembaca", "ReaderPass123")
        editor = get_or_create_user("editor@example.com", "redaksi", "EditorPass123")
        db.session.flush()

        Article.get_or_create(DEMO_ARTICLE_URL, "Artikel demo teknologi")

        interaction = ArticleInteraction.get_or_create(reader.id, DEMO_ARTICLE_URL)
        interaction.is_liked = True
        interaction.set_bookmarked(True)

        if not Comment.query.filter_by(article_identifier=DEMO_ARTICLE_URL).first():
            root = Comment.create(DEMO_ARTICLE_URL, "Artikel yang menarik!", reader)
            db.session.flush()
            Comment.create(DEMO_ARTICLE_URL, "Terima kasih sudah membaca.", editor, parent=root)
            root.toggle_like(editor.id)

        db.session.commit()

        print("Seed data inserted: reader, editor, article, comment thread.")


if __name__ == "__main__":
    main()
