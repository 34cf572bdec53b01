from client.models import Message
from client.render import (
    ChatListItem,
    MessageRow,
    chat_list,
    format_chat_list,
    format_transcript,
    message_rows,
)


def test_message_rows_map_roles():
    rows = message_rows([Message(role="user", content="a"), Message(role="assistant", content="b")])
    assert rows == [MessageRow(kind="user", content="a"), MessageRow(kind="ai", content="b")]


def test_chat_list_marks_active(store):
    first = store.create_chat()
    store.append_message(Message(role="user", content="first chat"))
    store.save_active_chat()
    second = store.create_chat()
    store.append_message(Message(role="user", content="second chat"))
    store.save_active_chat()

    assert chat_list(store) == [
        ChatListItem(id=second, title="second chat", active=True),
        ChatListItem(id=first, title="first chat", active=False),
    ]


def test_empty_transcript_shows_welcome():
    text = format_transcript([])
    assert "Welcome to Thunder GPT" in text
    assert "Explain quantum computing" in text


def test_transcript_and_list_text():
    assert format_transcript([MessageRow("user", "hi"), MessageRow("ai", "yo")]) == "You: hi\n\nThunder: yo"
    assert format_chat_list([]) == "No saved chats yet."
    assert format_chat_list([ChatListItem("1", "t", True)]) == "* 1  t"
