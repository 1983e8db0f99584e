"""
Main NiceGUI application for jsongraph.

Shows the canonical JSON document twice: as text in a code editor on the
left and as a node graph rendered with ui.echart on the right. Clicking a
node opens the node dialog, where the node's values can be edited and
committed back into the document.

The document store is the single writer. Text typed into the editor is
parsed by the store and re-derives the graph. A node commit writes text and
value together, tagged with the committing session, so that session skips
the change while other pages refresh; the editor pane only receives the new
text and nothing is written back a second time.
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import ui

load_dotenv()

from jsongraph.config import get_document_path, get_indent, get_port
from jsongraph.storage import create_store, EVENT_TEXT_CHANGE, EVENT_VALUE_CHANGE, EVENT_PARSE_ERROR
from jsongraph.graph_builder import build_graph, graph_summary
from jsongraph.graph_viz import GraphVisualizer, normalize_click_payload, resolve_node_id_from_payload
from jsongraph.edit import EditMode, EditSession
from jsongraph.components import render_node_modal

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
logger = logging.getLogger(__name__)

# One document per server process; every page edits the same store.
store = create_store(get_document_path())
visualizer = GraphVisualizer()


@ui.page('/')
def main_page():
    ui.dark_mode().enable()

    # We use a container for mutable state to be accessible in closures
    state = {
        'graph': build_graph(store.get_canonical_value()),
        'chart': None,
        'editor': None,
        'status': None,
        'dialog': None,
        'applying_store_text': False,
    }
    session = EditSession(store, indent=get_indent())

    def update_status(message: str = None, error: bool = False):
        label = state['status']
        if not label:
            return
        if message is None:
            counts = graph_summary(state['graph'])
            message = f"rev {store.revision} · {counts['nodes']} nodes · {counts['edges']} edges"
        label.set_text(message)
        label.classes(replace='text-xs ' + ('text-red-400' if error else 'text-gray-400'))

    def refresh_chart_ui():
        chart = state['chart']
        if not chart:
            return
        options = visualizer.generate_echarts(state['graph'])
        chart.options.clear()
        chart.options.update(options)
        chart.update()

    # --- Store listeners ---

    def on_value_change(change):
        state['graph'] = build_graph(change.value)
        refresh_chart_ui()
        update_status()
        # Node ids are per snapshot; point the open dialog at the re-derived node.
        node = session.node
        if node is not None and session.mode == EditMode.VIEWING:
            fresh = state['graph'].find_by_path(node.path)
            if fresh is not None:
                session.select_node(fresh)

    def on_text_change(change):
        editor = state['editor']
        if editor is None or editor.value == change.text:
            return
        # Programmatic update; the editor's change handler must not write it back.
        state['applying_store_text'] = True
        try:
            editor.set_value(change.text)
        finally:
            state['applying_store_text'] = False

    def on_parse_error(change):
        update_status(f'Invalid JSON: {change.error}', error=True)

    store.on(EVENT_VALUE_CHANGE, on_value_change)
    store.on(EVENT_TEXT_CHANGE, on_text_change)
    store.on(EVENT_PARSE_ERROR, on_parse_error)

    def cleanup():
        store.off(EVENT_VALUE_CHANGE, on_value_change)
        store.off(EVENT_TEXT_CHANGE, on_text_change)
        store.off(EVENT_PARSE_ERROR, on_parse_error)
        session.dispose()

    ui.context.client.on_disconnect(cleanup)

    # --- Interaction ---

    def handle_editor_change(e):
        if state['applying_store_text']:
            return
        text = e.value or ''
        if text == store.get_canonical_text():
            return
        store.set_canonical_text(text)

    def handle_chart_click(e):
        payload = normalize_click_payload({
            'componentType': e.component_type,
            'name': e.name,
            'dataType': e.data_type,
        })
        node_id = resolve_node_id_from_payload(payload, state['graph'])
        if not node_id:
            return
        session.select_node(state['graph'].get_node(node_id))
        state['dialog'].open()

    def export_dot():
        dot = visualizer.to_graphviz(state['graph'])
        logger.info(f"Exporting DOT for revision {store.revision}")
        ui.download(dot.source.encode('utf-8'), 'document.dot')

    # --- Layout Construction ---

    with ui.header().classes('items-center justify-between bg-slate-900 py-1'):
        ui.label('jsongraph').classes('text-lg font-bold')
        with ui.row().classes('items-center gap-2'):
            state['status'] = ui.label('').classes('text-xs text-gray-400')
            ui.button(icon='download', on_click=export_dot).props('flat round dense color=grey').tooltip('Export DOT')

    with ui.splitter(value=35).classes('w-full h-[calc(100vh-4rem)]') as splitter:
        with splitter.before:
            state['editor'] = ui.codemirror(
                store.get_canonical_text(),
                language='JSON',
                theme='oneDark',
                on_change=handle_editor_change,
            ).classes('w-full h-full')
        with splitter.after:
            state['chart'] = ui.echart(
                visualizer.generate_echarts(state['graph']),
                on_point_click=handle_chart_click,
            ).classes('w-full h-full')

    state['dialog'] = render_node_modal(session)
    update_status()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='jsongraph',
        port=get_port(),
        reload=not getattr(sys, 'frozen', False),
    )
