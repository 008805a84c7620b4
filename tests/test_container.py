from txt_search_tool.config.settings import Settings
from txt_search_tool.container import configure_container
from txt_search_tool.core.protocols import LineSourceProtocol, PreferenceStoreProtocol
from txt_search_tool.core.services import QuickPhraseService, SearchEngine, Session


def test_container_wires_sessions(tmp_path):
    settings = Settings(context_size=4, preferences_path=str(tmp_path / "prefs.json"))
    container = configure_container(settings)
    container.reset()

    first = container.resolve(Session)
    second = container.resolve(Session)

    assert first is not second
    assert first.context_size == 4
    assert container.resolve(SearchEngine) is container.resolve(SearchEngine)
    assert isinstance(container.resolve(LineSourceProtocol), LineSourceProtocol)

    phrases = container.resolve(QuickPhraseService)
    phrases.add("error")
    assert container.resolve(PreferenceStoreProtocol).load_list() == ["error"]

    container.reset()
