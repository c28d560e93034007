import streamlit as st

from dashboard.context import Route, parse_route, route_params


def current_route():
    return parse_route(st.query_params.to_dict())


def navigate(page, record_id=None, edit=False, new=False):
    st.query_params.clear()
    st.query_params.update(route_params(Route(page=page, record_id=record_id, edit=edit, new=new)))
    st.rerun()
