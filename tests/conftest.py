"""Shared fixtures for skillscan tests."""
import json
import textwrap

import pytest

from skillscan.analyzers.models import Category, SourceFile


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from real config files and SKILLSCAN_* variables.

    HOME points at a scratch directory (global config) and the working
    directory is a fresh empty folder (project config).
    """
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    for var in ("SKILLSCAN_DEBUG", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    from skillscan.core.config_service import ENV_VAR_MAP, reset_config_service
    for var in ENV_VAR_MAP:
        monkeypatch.delenv(var, raising=False)

    import skillscan.ui as ui
    monkeypatch.setattr(ui, "_plain_mode", False)
    monkeypatch.setattr(ui, "console", ui.console)

    reset_config_service()
    yield workdir
    reset_config_service()


@pytest.fixture
def make_file():
    """Build a SourceFile the way the classifier would."""
    def _make(path: str, content: str, category: Category = Category.BACKEND) -> SourceFile:
        content = textwrap.dedent(content)
        return SourceFile(
            path=path,
            content=content,
            size=len(content.encode("utf-8")),
            extension="." + path.rsplit(".", 1)[-1].lower() if "." in path else "",
            category=category,
        )
    return _make


@pytest.fixture
def mern_snapshot():
    """A small React + Express + MongoDB project as ``path -> content``."""
    return {
        "package.json": json.dumps({
            "name": "shop",
            "scripts": {"test": "jest --coverage", "lint": "eslint ."},
            "dependencies": {"react": "18.0.0", "express": "4.18.0", "mongoose": "7.0.0"},
            "devDependencies": {"jest": "29.0.0", "eslint": "8.0.0"},
        }, indent=2),
        "src/components/UserCard.jsx": textwrap.dedent("""\
            import React, { useState } from 'react';

            /** Shows one user. */
            export default function UserCard(props) {
              const [open, setOpen] = useState(false);
              return (<div onClick={() => setOpen(!open)}>{props.name}</div>);
            }
        """),
        "server/routes.js": textwrap.dedent("""\
            const express = require('express');
            const mongoose = require('mongoose');
            const app = express();

            app.get('/api/users', async (req, res) => {
              const users = await mongoose.model('User').find();
              if (!users) {
                return res.status(404).end();
              }
              res.json(users);
            });
            app.post('/api/login', handler);
        """),
        "__tests__/routes.test.js": textwrap.dedent("""\
            describe('routes', () => {
              it('lists users', () => {
                expect(listUsers()).toBeDefined();
              });
              test('logs in', () => {
                expect(login('a', 'b')).toBe(true);
              });
            });
        """),
        "README.md": textwrap.dedent("""\
            # Shop

            ## Installation

            npm install

            ## Usage

            npm start
        """),
    }
